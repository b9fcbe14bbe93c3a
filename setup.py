from setuptools import setup, find_packages


setup(
    name="txtar",
    version="0.1",
    packages=find_packages(),
    description="A trivial, hand-editable text archive format: a comment plus '-- NAME --' file sections.",
    author="vercingetorx",
    python_requires=">=3.10",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "txtar=txtar.cli:main",
        ]
    },
)
