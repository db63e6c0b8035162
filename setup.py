from setuptools import setup, find_packages

setup(
    name="trivia-quiz",
    version="0.1.0",
    description="Timed multiple-choice trivia mini-game with per-subject progress",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pyttsx3>=2.90",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "trivia-quiz=trivia_quiz.game:main",
        ],
    },
)
