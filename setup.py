from setuptools import setup, find_packages

setup(
    name="exercise-media-ingest",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn[standard]>=0.27.0",
        "gunicorn>=21.2.0",
        "pydantic>=2.0.0",
        "aiohttp>=3.9.0",
        "beautifulsoup4>=4.12.0",
        "httpx>=0.26.0",
        "psycopg2-binary>=2.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
    },
)
