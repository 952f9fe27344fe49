"""
Setup script for the Gig Guide API package
"""
from setuptools import setup, find_packages

setup(
    name="gig_guide",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"gig_guide": ["config/*.yaml"]},
    include_package_data=True,
    python_requires=">=3.10,<3.14",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "sqlalchemy>=2.0",
        "alembic>=1.13",
        "psycopg2-binary>=2.9",
        "pydantic>=2.5",
        "email-validator>=2.1",
        "python-jose[cryptography]>=3.3",
        "passlib[bcrypt]>=1.7.4",
        "bcrypt>=4.0",
        "python-dotenv>=1.0",
        "python-multipart>=0.0.9",
        "httpx>=0.27",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gig-guide=gig_guide.main:run",
        ],
    },
)
