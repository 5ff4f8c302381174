def build_plagiarism_prompt(code: str, language: str, problem_statement: str) -> str:
    return f"""
You are a Plagiarism Detection Agent specializing in identifying code similarities and potential plagiarism.

Problem Statement: {problem_statement}
Language: {language}

Code:
```{language}
{code}
```

Analyze this code for potential plagiarism. Focus on:
1. Similarities to common solutions or patterns
2. Distinctive implementation approaches vs standard solutions
3. Unique coding style indicators
4. Sections that appear directly copied from known sources
5. Algorithm implementation originality

Provide your analysis in this JSON format:
{{
  "score": <number from 0-100, higher means more original/less plagiarized>,
  "issues": [
    {{"line": <starting line number or null>, "endLine": <ending line number or null>, "description": "<similarity description>", "severity": "<critical|major|minor|info>", "possibleSource": "<potential source if identifiable>"}}
  ],
  "summary": "<overall assessment of code originality>",
  "recommendations": ["<suggestion to improve code originality>"]
}}

Ensure your response is ONLY valid JSON with no additional text.
"""
