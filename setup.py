from setuptools import setup, find_packages

VERSION = "1.0.0"

def get_requirements():
    """Runtime requirements."""
    return ["python-dateutil>=2.8.0", "typing-extensions>=3.7.4"]

def get_long_description():
    """Get long description from README."""
    with open("README.md", "r") as f:
        return f.read()

setup(
    name="taskgraph",
    version=VERSION,
    description="Dependency-graph task executor with lazy, memoized results",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=get_requirements(),
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    author="Test Author",
    python_requires=">=3.7"
)
