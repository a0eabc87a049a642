IDEA_EXAMPLE = """{
  "idea": {
    "title": "AI-powered Fitness Coach",
    "description": "Create a virtual fitness coach app that analyzes user's movements using their phone camera and provides real-time feedback to improve form and prevent injuries.",
    "tags": ["AI", "Health", "Mobile App", "Beginner Friendly"]
  }
}"""

IDEA_PROMPT = """You are BuildBoard — an AI that gives a single project idea based on difficulty level: {difficulty}.
Return the response ONLY in JSON format:

{example}"""

DEFAULT_DIFFICULTY = "easy"


def build_prompt(difficulty: str = DEFAULT_DIFFICULTY) -> str:
    """Instruction asking the model for one idea at the given difficulty."""
    difficulty = difficulty or DEFAULT_DIFFICULTY
    return IDEA_PROMPT.format(difficulty=difficulty, example=IDEA_EXAMPLE)
