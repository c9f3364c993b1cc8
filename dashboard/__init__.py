"""LFC Learning dashboard gateway.

Settings come from the environment. A ``.env`` in the working directory or
the project root is read first, so a local run needs no exports.
"""

from pathlib import Path

from dotenv import load_dotenv

__version__ = "0.1.0"

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Variables already exported win over both files
for env_file in (Path.cwd() / ".env", PROJECT_ROOT / ".env"):
    if env_file.is_file():
        load_dotenv(dotenv_path=env_file, override=False)
