from setuptools import setup, find_packages

setup(
    name="respdb",
    version="0.1.0",
    packages=find_packages(include=["respdb", "respdb.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "biopython",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["respdb=respdb.cli:main"],
    },
)
