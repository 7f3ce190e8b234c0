estimate_story_points_prompt = """
You are an expert in agile methodologies and story point estimation.

Analyze the task description below and estimate how many story points it should receive.

Task description: "{description}"
Task type: "{task_type}"

<Factors to weigh>
1. Technical complexity
2. Effort required
3. Uncertainty and risk
4. Dependencies

<Mandatory output>
Answer ONLY with one number from the Fibonacci sequence (1, 2, 3, 5, 8, 13, 21) that best represents
the story point estimate for this task.

Your answer must be ONLY the number, with no explanation or additional text.
"""
