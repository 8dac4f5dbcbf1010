from setuptools import setup, find_packages
import os

version = "1.0.0"
if os.path.exists("VERSION"):
    with open("VERSION", "r") as f:
        version = f.read().strip()

setup(
    name="netsuite-rest",
    version=version,
    packages=find_packages(include=["netsuite_rest", "netsuite_rest.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "httpx[http2]>=0.24.0",
        "oauthlib>=3.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "netsuite-rest=netsuite_rest.__main__:main",
        ],
    },
)
