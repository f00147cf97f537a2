from aitinerary.core.schemas import PreferenceQuestion

# Personalization questionnaire, in display order. Field names match UserPreferences.
PREFERENCE_QUESTIONS: list[PreferenceQuestion] = [
    PreferenceQuestion(
        field="kids", question="Are you traveling with any kids?", kind="choice", options=["Yes", "No"]
    ),
    PreferenceQuestion(
        field="pets",
        question="Will you be bringing any pets along?",
        kind="choice",
        options=["Yes", "No"],
    ),
    PreferenceQuestion(
        field="peopleInParty",
        question="How many people do you usually travel with?",
        kind="range",
        min=1,
        max=10,
        step=1,
        default=1,
    ),
    PreferenceQuestion(
        field="locationPreference",
        question="Would you rather explore bustling cities or tranquil countryside?",
        kind="choice",
        options=["City", "Countryside"],
    ),
    PreferenceQuestion(
        field="activityPreference",
        question="What type of activities do you enjoy the most?",
        kind="choice",
        options=["Adventure", "Relaxation"],
    ),
    PreferenceQuestion(
        field="culinaryPreference",
        question="What kind of culinary experiences are you interested in?",
        kind="choice",
        options=["Fine Dining", "Local Cuisine"],
    ),
    PreferenceQuestion(
        field="explorationPreference",
        question="Do you prefer structured tours or independent exploration?",
        kind="choice",
        options=["Structured tours", "Independent exploration"],
    ),
    PreferenceQuestion(
        field="nightlifeImportance",
        question="How important is nightlife to your travel plans?",
        kind="choice",
        options=["Very important", "Somewhat important", "Not important"],
    ),
    PreferenceQuestion(
        field="culturalInterest",
        question="Do you have a strong interest in local culture?",
        kind="choice",
        options=["Yes", "No"],
    ),
    PreferenceQuestion(
        field="budget",
        question="Budget per day (USD):",
        kind="range",
        min=100,
        max=5000,
        step=10,
        default=100,
    ),
]
