from classifier import is_complex_problem
from models import Mode

NORMAL_PROMPT_TEMPLATE = """Generate study materials for the topic "{topic}".

RULES:
1. The summary has EXACTLY 3 bullet points with concrete facts about the topic
2. The quiz has EXACTLY 3 multiple-choice questions
3. Each question has EXACTLY 4 options labelled "A) ", "B) ", "C) ", "D) "
4. correctAnswer is a single letter A, B, C or D; vary it between questions
5. The study tip is one practical tip for learning this topic effectively

JSON SCHEMA (return ONLY this, nothing else):
{{
  "summary": ["bullet point 1", "bullet point 2", "bullet point 3"],
  "quiz": [
    {{
      "question": "Question text here?",
      "options": ["A) Option 1", "B) Option 2", "C) Option 3", "D) Option 4"],
      "correctAnswer": "A",
      "explanation": "Brief explanation why this is correct"
    }}
  ],
  "studyTip": "One practical study tip"
}}

Return ONLY valid JSON, no additional text or markdown formatting.
"""

MATH_PROMPT_TEMPLATE = """Generate math/quantitative study materials for the topic "{topic}".

JSON SCHEMA (return ONLY this, nothing else):
{{
  "summary": ["bullet point 1", "bullet point 2", "bullet point 3"],
  "mathQuestion": {{
    "question": "A challenging quantitative or logic problem related to this topic",
    "answer": "The correct answer",
    "explanation": "Detailed step-by-step explanation of how to solve this problem"
  }},
  "studyTip": "One practical study tip for the mathematical or logical concepts in this topic"
}}

The math question should test logical thinking, calculation, or problem-solving related to the topic.
Return ONLY valid JSON, no additional text or markdown formatting.
"""

PROBLEM_PROMPT_TEMPLATE = """You are an expert mathematician and computer scientist. Solve the following problem correctly and explain the solution.

PROBLEM TO SOLVE:
{topic}

HOW TO SOLVE:
1. ALGORITHMIC COMPLEXITY questions: count loops, recursive calls and comparisons, give the Big O
   notation (O(1), O(log n), O(n), O(n log n), O(n^2)) and explain why. Solve every part of a
   multi-part question separately; an "overall complexity" combines all steps.
2. WORD or SITUATION problems: identify what is asked, extract the numbers and relationships,
   set up the equations, solve step by step and check the answer is reasonable. Include units.
3. CALCULATION problems: show every step and intermediate result.
4. LOGIC problems: reason step by step and consider edge cases.

Solve the ONE problem asked, using its exact numbers. Do not invent a new problem and do not
return generic placeholder content.

JSON SCHEMA (return ONLY this, nothing else):
{{
  "summary": [
    "First key concept or step in solving this problem",
    "Second key concept or step in solving this problem",
    "Third key concept or step in solving this problem"
  ],
  "mathQuestion": {{
    "question": "{topic}",
    "answer": "The correct answer to this specific problem",
    "explanation": "Step-by-step solution using the numbers from the problem"
  }},
  "studyTip": "A practical tip for solving similar problems"
}}

EXAMPLES:
Question: "You have an array of 1000 numbers. Linear search worst-case time complexity?"
Answer: "O(n) where n = 1000"
Explanation: "In the worst case the target is last or absent, so all n = 1000 elements are checked: O(n)."

Question: "You have an array of 1000 numbers. If you sort first then use binary search, what is the overall complexity?"
Answer: "O(n log n)"
Explanation: "Sorting costs O(n log n) and binary search O(log n); O(n log n) + O(log n) = O(n log n)."

Question: "If you have 5 apples and give away 2, how many do you have?"
Answer: "3 apples"
Explanation: "5 - 2 = 3, so 3 apples remain."

Return ONLY valid JSON, no additional text or markdown formatting.
"""


def build_prompt(topic: str, mode: Mode) -> str:
    if mode == Mode.MATH:
        if is_complex_problem(topic):
            return PROBLEM_PROMPT_TEMPLATE.format(topic=topic)
        return MATH_PROMPT_TEMPLATE.format(topic=topic)
    return NORMAL_PROMPT_TEMPLATE.format(topic=topic)
