from setuptools import setup, find_packages

def parse_requirements(requirements):
    with open(requirements) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]

requirements = parse_requirements("requirements.txt")

setup(
    name='edutoolkit',
    version='0.1.0',
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
    package_dir={"": "src"},
    packages=find_packages("src", exclude=["*.tests", "*.tests.*"]),
    package_data={
        "edutoolkit": ["alembic.ini", "alembic/script.py.mako", "alembic/env.py", "alembic/versions/*.py"],
    },
    entry_points={
        "console_scripts": [
            "edutoolkit=edutoolkit.cli.cli:cli",
        ],
    }
)
