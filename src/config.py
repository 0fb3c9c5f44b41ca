"""
Global settings for ElasticSense Coach.
Elastic brand palette: dark background, teal/pink/yellow accents.
"""

# Page
PAGE_TITLE = "ElasticSense Coach"
PAGE_ICON = "🧭"

# Sidebar
SIDEBAR_HEADER = "ElasticSense · SA Interview Prep"

# Model
MODEL_NAME = "gpt-4o"
API_KEY_ENV = "OPENAI_API_KEY"
TUTOR_TEMPERATURE = 0.4
STRUCTURED_TEMPERATURE = 0.3

# Quiz
QUIZ_QUESTION_COUNT = 3

# Fallback texts shown in place of model output
CHAT_ERROR_TEXT = "Connection lost. The cluster might be red. Please try again."
INTERVIEW_START_ERROR_TEXT = "Error starting interview"
MODULE_EMPTY_TEXT = "Failed to load content."
MODULE_ERROR_TEXT = "Error loading module content. Please check your API key."
QUIZ_ERROR_TEXT = "Error generating quiz"
ARCHITECTURE_ERROR_TEXT = "Failed to generate architecture. Please try again."

# Elastic palette
ELASTIC_DARK = "#101C3F"
ELASTIC_BLUE = "#0077CC"
ELASTIC_TEAL = "#00BFB3"
ELASTIC_PINK = "#F04E98"
ELASTIC_YELLOW = "#FEC514"

# Node-type accent colours for the architecture sandbox
NODE_TYPE_COLORS = {
    "master": ELASTIC_PINK,
    "data": ELASTIC_BLUE,
    "coordinating": "#98A2B3",
    "ml": ELASTIC_TEAL,
    "ingest": ELASTIC_YELLOW,
}
