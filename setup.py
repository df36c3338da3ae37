from setuptools import setup, find_packages

setup(
    name="daemon-rpc",
    version="0.1.0",
    description="JSON-RPC over HTTP client with typed result decoding",
    author="daemon-rpc Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "httpx>=0.24.0",
        "protobuf>=4.21.0",
        "pydantic>=2.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
