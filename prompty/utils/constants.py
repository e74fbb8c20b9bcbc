from prompty.models.enums import Modality

MODALITY_LABELS = {
    Modality.VISUAL.value: "Visual",
    Modality.CINEMATIC.value: "Cinematic",
    Modality.LOGIC.value: "Logic",
    Modality.AUTONOMOUS.value: "Autonomous",
}

# Lucide icon names
MODALITY_ICONS = {
    Modality.VISUAL.value: "image",
    Modality.CINEMATIC.value: "film",
    Modality.LOGIC.value: "code-2",
    Modality.AUTONOMOUS.value: "sparkles",
}
DEFAULT_MODALITY_ICON = "sparkles"

CATEGORY_OPTIONS = [(modality.value, MODALITY_LABELS[modality.value]) for modality in Modality]

ELLIPSIS = "…"
DEFAULT_IMAGE_EXTENSION = "jpg"

SUCCESS_MESSAGE = "Prompt added successfully."
ERROR_PREFIX = "Error: "
UNKNOWN_ERROR = "Unknown error"


class Page:
    HERO_TITLE = "The Global Prompt Architecture"
    HERO_SUBTITLE = (
        "Verified prompt assets on the Nexus Core—visual, cinematic, logic, and autonomous workflows."
    )
    EMPTY_TITLE = "No prompts verified yet"
    EMPTY_DESCRIPTION = "Be the first to add a verified prompt from the Creator Dashboard."
    EMPTY_CTA = "Go to Dashboard"
    VIEW_DETAILS = "View Details"
    NOT_FOUND_TITLE = "Prompt not found"


class Dashboard:
    TITLE = "Creator Dashboard"
    SUBTITLE = "Manage and publish your prompt assets."
    CARD_TITLE = "Quick Add"
    CARD_DESCRIPTION = "Submit a new prompt asset to your catalog."
    LABEL_TITLE = "Title"
    LABEL_CATEGORY = "Category"
    LABEL_PROMPT = "Prompt text"
    LABEL_OUTPUT = "Expected output description"
    LABEL_PREVIEW_IMAGE = "Output Preview Image"
    PLACEHOLDER_TITLE = "e.g. Cinematic fire sequence for Kling"
    PLACEHOLDER_CATEGORY = "Select modality"
    PLACEHOLDER_PROMPT = "Enter your prompt template. Use {{variables}} for user inputs."
    PLACEHOLDER_OUTPUT = "Describe the expected output or attach a preview URL."
    SUBMIT_LABEL = "Add prompt"
