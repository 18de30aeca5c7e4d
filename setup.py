from setuptools import setup, find_packages

setup(
    name="school-signage-core",
    version="0.1.0",
    description="Resilient state and remote-data cache for school digital signage kiosks",
    author="Matt Skillman",
    packages=find_packages(include=["src", "src.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
        "requests>=2.31.0",
        "pypdf>=4.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "black>=23.0.0",
            "pylint>=2.17.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "signage-admin=src.signage.__main__:main",
        ]
    },
)
