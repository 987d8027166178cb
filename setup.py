from setuptools import setup, find_namespace_packages

setup(
    name="article_search",
    version="0.1",
    packages=find_namespace_packages(include=["app*", "search*", "models*", "ingestion*"]),
    package_data={"app.data": ["*.json"]},
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "rapidfuzz",
        "regex",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx>=0.27.0",
        ],
    },
    python_requires='>=3.11',
)
