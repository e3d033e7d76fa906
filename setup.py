# setup.py
from setuptools import setup, find_packages

setup(
    name="adt_decoder",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "Pillow>=9.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    python_requires=">=3.8",
    description="Decoder for World of Warcraft ADT/WDT terrain files",
    keywords="wow, adt, wdt, terrain",
    entry_points={
        'console_scripts': [
            'adt-decode=adt_decoder.main:main',
        ],
    }
)
