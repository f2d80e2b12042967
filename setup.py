from setuptools import find_packages, setup

setup(
    name="pbclattice",
    version="0.1.0",
    description="3D periodic lattices and minimum image convention distances",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "numpy",
        "trimesh",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "pbclattice-mic=pbclattice.cmd.mic:main",
        ],
    },
)
