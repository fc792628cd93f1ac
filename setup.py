"""Setup script for the xac provider."""

from setuptools import setup, find_packages

# Read long description from README
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="xac-provider",
    version="0.1.0",
    author="xac Provider Team",
    author_email="provider@example.com",
    description="TencentCloud credential resolution and API client configuration for the xac provider",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/jchalex/terraform-provider-xac",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "tencentcloud-sdk-python-common>=3.0.1000",
        "tencentcloud-sdk-python-sts>=3.0.1000",
        "rich>=13.0.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "xac-provider=xac_provider.cli:main",
        ],
    },
)
