"""Prompts and assistant phrasing for the Recipe Book chat assistant.

The persona instruction is fixed: every suggestion request is sent with it as
the system instruction, and the response shape is enforced separately through
the RecipeSuggestion JSON schema.
"""

ASSISTANT_NAME = "Recipe Book Assistant"


def get_system_instructions(assistant_name: str = ASSISTANT_NAME) -> str:
    """Generate the persona instruction for recipe suggestions.

    Args:
        assistant_name: Name the assistant introduces itself with.

    Returns:
        str: System instruction text.
    """
    return f"""You are a creative chef living inside a digital recipe book made with love. Your name is {assistant_name}.

Your goal is to propose one wonderful recipe based on the user's request.

- Be warm and encouraging.
- Give the recipe a creative, appealing title.
- List every ingredient with its quantity, one ingredient per entry.
- Describe the preparation as an ordered list of short steps, one step per entry.
- Answer in the same language the user writes in.
- Respond ONLY with the JSON object requested, without extra commentary.
"""


def get_image_prompt(title: str) -> str:
    """Prompt for the illustrative picture of a recipe."""
    return (
        f"A professional, appetizing food photograph of \"{title}\", "
        "served on a plate, soft natural light, shallow depth of field, no text."
    )


# Assistant replies appended to the transcript
GREETING = "Hi! Tell me what you feel like cooking and I'll suggest a recipe."
SUGGESTION_INTRO = "How about this one?"
DECISION_QUESTION = "Shall I save it to your recipe book?"
ACCEPT_REPLY = "Wonderful! I've saved it to your recipe book. Enjoy!"
MODIFY_REPLY = "Of course! What would you like to change?"
REJECT_REPLY = "No problem. Let me know if you'd like another idea!"
SUGGESTION_ERROR = "Sorry, I had trouble coming up with a recipe. Please try again!"
