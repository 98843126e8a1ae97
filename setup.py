from setuptools import setup, find_packages

setup(
    name="raft-lang",
    version="0.1.0",
    description="Raft v0.1 — scanner, recursive descent parser and tree-walking interpreter for a small scripting language",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Raft Project",
    python_requires=">=3.9",
    packages=find_packages(),
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "raft=raft.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Interpreters",
    ],
)
