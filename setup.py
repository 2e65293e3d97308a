from setuptools import setup, find_packages

setup(
    name="ttt_twist",
    version="0.1",
    description="Tic-Tac-Toe variants engine with alpha-beta search",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "ttt-twist=ttt_twist.play:main",
        ],
    },
)
