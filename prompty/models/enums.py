from enum import Enum


class Modality(str, Enum):
    VISUAL = "visual"
    CINEMATIC = "cinematic"
    LOGIC = "logic"
    AUTONOMOUS = "autonomous"
