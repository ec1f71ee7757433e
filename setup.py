from setuptools import find_packages, setup

setup(
    name="addresses",
    version="0.1.0",
    description="Polymorphic postal addresses for application records",
    packages=find_packages(include=["addresses", "addresses.*"]),
    python_requires=">=3.10",
    install_requires=[
        "sqlalchemy>=2.0",
        "click>=8.0",
        "python-dotenv",
        "pandas"
    ],
    extras_require={"dev": ["pytest"]},
    entry_points={
        "console_scripts": ["addresses=addresses.cli.main:cli"]
    },
)
