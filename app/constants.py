from typing import Dict, List

APP_NAME = "News Quiz"
APP_VERSION = "1.0.0"
APP_MODE = "Development"

THEMES: List[str] = ["BlackSwan", "SignalDecoding", "PrisonersDilemma"]
DEFAULT_THEME = "BlackSwan"

MULTIPLE_CHOICE = "multiple-choice"
FREE_TEXT = "free-text"

# tokens found in older data files
QUESTION_TYPE_ALIASES: Dict[str, str] = {
    "multiple-choice": MULTIPLE_CHOICE,
    "multiple_choice": MULTIPLE_CHOICE,
    "mc": MULTIPLE_CHOICE,
    "객관식": MULTIPLE_CHOICE,
    "free-text": FREE_TEXT,
    "free_text": FREE_TEXT,
    "short": FREE_TEXT,
    "주관식": FREE_TEXT,
}

MIN_CHOICES = 2
MAX_CHOICES = 6

# game slug -> theme
GAME_TYPE_MAP: Dict[str, str] = {
    "g1": "BlackSwan",
    "g2": "PrisonersDilemma",
    "g3": "SignalDecoding",
}

THEME_LABELS: Dict[str, str] = {
    "BlackSwan": "Black Swan",
    "SignalDecoding": "Signal Decoding",
    "PrisonersDilemma": "Prisoner's Dilemma",
}

# UI config only
THEME_STYLES: Dict[str, Dict[str, str]] = {
    "BlackSwan": {
        "accent": "#3B82F6",
        "button": "#0A2540",
        "button_hover": "#1E3A8A",
        "progress": "#3B82F6",
    },
    "PrisonersDilemma": {
        "accent": "#8B5E3C",
        "button": "#8B5E3C",
        "button_hover": "#78716C",
        "progress": "#8B5E3C",
    },
    "SignalDecoding": {
        "accent": "#184E77",
        "button": "#184E77",
        "button_hover": "#266D7E",
        "progress": "#184E77",
    },
}

ISSUE_EMPTY_TEXT = "Question text is empty"
ISSUE_CHOICE_COUNT = "Multiple-choice questions need 2 to 6 choices"
ISSUE_DUPLICATE_CHOICES = "Choices must be different from each other"
ISSUE_NO_ANSWER = "Select the correct answer"
ISSUE_NO_CREATOR = "Enter the creator name"
ISSUE_BAD_URL = "Related article URL is not valid"

PROGRESS_KEY_PREFIX = "quiz-progress"
