from setuptools import setup, find_packages

setup(
    name="rotorforge",
    version="0.1.0",
    description="Real-time pursuit-rotor tracking-trial engine with probe-driven direction reversals",
    author="RotorForge Contributors",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*", "examples")),
    python_requires=">=3.8",
    install_requires=[
        "torch>=2.0.0",
        "numpy>=1.21.0",
        "PyYAML>=6.0",
        "tqdm>=4.60",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=3.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "rotorforge=rotorforge.cli:main",
        ],
    },
)
