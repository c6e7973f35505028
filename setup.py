from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read the requirements from requirements.txt
reqs_path = Path(__file__).parent / "requirements.txt"
requirements = [
    line.strip()
    for line in reqs_path.read_text().splitlines()
    if line.strip() and not line.startswith("#")
]

setup(
    name="vault-diff",
    version="0.1.0",
    description="git diff with decrypted changes of ansible-vault encrypted files",
    author="Sir Wabbit",
    # vaultdiff has no __init__.py
    packages=find_namespace_packages(include=["vaultdiff", "vaultdiff.*"]),
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "vault-diff=vaultdiff.cli:console_main",
        ],
    },
)
