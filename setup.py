"""
Setup script for skillroute-engine.

The SkillRoute adaptive learning engine is the scheduling core of the
SkillRoute learning platform. It provides:

1. SM-2 spaced repetition - When should a learner see an item again?
2. Proficiency estimation - How well does a learner know a topic right now?
3. Diagnostic selection - Which questions make a fair first assessment?

The 'skillroute' command is a terminal front end over the same engine.
"""

from setuptools import find_packages, setup

setup(
    name="skillroute-engine",
    version="1.0.0",
    description="Adaptive learning engine: SM-2 scheduling, decaying proficiency and diagnostic sampling",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="SkillRoute",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
        "postgres": [
            "psycopg2-binary>=2.9.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "skillroute=skillroute.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition sm2 adaptive education",
)
