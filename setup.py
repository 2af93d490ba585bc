from setuptools import setup, find_packages

setup(
    name="wizard-output-gateway",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "fastapi",
        "starlette",
        "pydantic>=2",
        "structlog",
        "PyYAML",
        "python-dotenv",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "hypothesis",
            "httpx",
        ],
    },
    description="Response-rendering gateway for a multi-step configuration wizard.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
