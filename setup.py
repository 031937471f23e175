import sys
import traceback
from setuptools import find_packages, setup

def get_packages():
    """Get package list with debug information."""
    try:
        packages = find_packages(include=["project_tracker", "project_tracker.*"])
        print(f"Found packages: {packages}")
        return packages
    except Exception as e:
        print(f"Error finding packages: {e}")
        print(f"Traceback:\n{traceback.format_exc()}")
        return []

try:
    print(f"Python version: {sys.version}")

    setup(
        name="project-tracker",
        version="0.3.0",
        packages=get_packages(),
        package_dir={"": "."},  # Add explicit package directory
        include_package_data=True,  # Include non-Python files
        package_data={"project_tracker": ["config.yml"]},
        install_requires=[
            # Web Framework
            "fastapi>=0.100.0",
            "uvicorn>=0.15.0",
            # Core Dependencies
            "pydantic>=2.0",
            "python-dotenv>=0.19.0",
            "pyyaml>=6.0",
            "python-ulid>=2.0",
            # Utils
            "rich>=10.0.0",
            "typer>=0.9.0",
            "httpx>=0.24.0",
        ],
        extras_require={
            "test": [
                "pytest>=7.0.0",
                "pytest-asyncio>=0.21.0",
            ],
        },
        python_requires=">=3.9",
        entry_points={
            "console_scripts": [
                "tracker=project_tracker.cli.cli:app",
                "tracker-web=project_tracker.web.app:main",
            ],
        },
    )
except Exception as e:
    print(f"Setup failed: {e}")
    print(f"Traceback:\n{traceback.format_exc()}")
    raise
