#!/usr/bin/env python

from setuptools import setup

setup(
    name="cqlfs",
    version="0.1.0",
    description="Virtual file system stored in a ScyllaDB/Cassandra table",
    packages=["cqlfs"],
    include_package_data=True,
    zip_safe=False,
    keywords=["cassandra", "scylladb", "filesystem"],
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Topic :: Database",
    ],
    python_requires=">=3.10",
    install_requires=[
        "cassandra-driver>=3.29",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "class-doc",
    ],
    extras_require={
        'dev': [
            'pytest',
            'anyio',
            'mypy',
            'flake8',
        ]
    },
)
