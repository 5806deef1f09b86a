"""Setup configuration for x-likes-blog package."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="x-likes-blog",
    version="0.1.0",
    author="Developer",
    description="Turn X liked tweets and bookmarks into markdown blog posts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["xclient", "xclient.*", "blogsync", "blogsync.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.28.0",
        "python-dotenv>=0.20.0",
        "apscheduler>=3.9,<4",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "pylint>=2.15.0",
            "mypy>=0.990",
        ],
    },
    entry_points={
        "console_scripts": [
            "blogsync=blogsync.main:main",
        ],
    },
)
