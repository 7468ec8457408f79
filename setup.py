"""Setup configuration for storefront-checkout project."""

from setuptools import setup, find_packages

setup(
    name="storefront-checkout",
    version="1.0.0",
    description="Session carts, stock-safe checkout and order history with FastAPI, PostgreSQL and Redis",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
        "redis>=5.0.0",
        "sqlalchemy>=2.0.23",
        "psycopg2-binary>=2.9.9",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.25",
            "fakeredis>=2.20",
        ],
    },
)
