"""Static metadata describing ExamQt."""

APP_NAME = "ExamQt"
APP_VERSION = "0.2"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "ExamQt is a course quiz console built with Qt and FastAPI. Instructors author timed "
    "multiple-choice quizzes; students take them with a question palette, review flags and "
    "an automatic submit when the time runs out."
)

HELP_TEXT = (
    "Pick your role in the top bar. Students choose a quiz and press Start; the countdown "
    "keeps running while you move between questions, and the quiz is submitted automatically "
    "when it reaches zero. Instructors can create quizzes in the editor or import a .txt file:\n\n"
    "TITLE: Angles\nCOURSE: math-101\nTIMELIMIT: 10\n\n"
    "Q: What is $30^o$ in radians?\n"
    "A: \\frac{\\pi}{2}\nB: \\frac{\\pi}{6}\nC: \\frac{\\pi}{4}\nD: \\frac{\\pi}{3}\n"
    "CORRECT: B\nEXPLANATION: $180^o$ is $\\pi$ radians."
)
