from setuptools import setup, find_packages

setup(
    name="fx-vol-dashboard",
    version="0.1.0",
    description="Browser dashboard for FX option implied volatility surfaces",
    packages=find_packages(exclude=["tests"]),
    py_modules=["main"],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "pandas>=2.0",
        "matplotlib>=3.7",
        "plotly>=5.15",
        "dash>=2.9",
        "httpx>=0.24",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
    entry_points={
        "console_scripts": [
            "fx-vol-dashboard=main:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Topic :: Office/Business :: Financial",
        "Topic :: Scientific/Engineering",
    ],
)
