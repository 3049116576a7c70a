from setuptools import setup, find_packages
import re

# Read version from taxcurve/__init__.py
with open('taxcurve/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='taxcurve',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'taxcurve': ['tax-rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tax-curve=taxcurve.cli.__main__:main',
            'tax-curve-mcp=taxcurve.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='UK marginal and effective tax rate curves.',
    python_requires='>=3.10',
)
