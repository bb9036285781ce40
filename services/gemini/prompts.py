"""Prompt builders for skin image analysis and the health chat assistant."""

CHAT_GREETING = "Hello! I am your AI skin health assistant. Ask me about skin conditions!"

CHAT_FALLBACK = "I am experiencing technical difficulties. Please try again later."

SUGGESTED_QUESTIONS = (
    "What are the symptoms of eczema?",
    "What are home remedies for mild sunburn?",
)


def build_analysis_prompt() -> str:
    """Return the fixed instruction sent alongside every analysed image."""
    return (
        "Analyze this skin image. "
        "Provide disease name, confidence score, description, and medical disclaimer. "
        "Format the output clearly."
    )


def build_chat_prompt(question: str) -> str:
    """Wrap a user question in the skin-health assistant template."""
    return (
        f'Answer this skin health question: "{question}". '
        "Provide helpful information but remind users to consult healthcare professionals."
    )
