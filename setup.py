from setuptools import setup, find_packages

setup(
    name='page_resolver',
    version='1.0.0',
    description='Resolve page ids of a hierarchical pages table into site URLs',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.10',
    install_requires=[
        'SQLAlchemy>=2.0.0',
        'pyyaml>=6.0',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        'mysql': [
            'PyMySQL>=1.1.0',
        ],
        'dev': [
            'pytest>=7.4.0',
            'pytest-cov>=4.1.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.5.0',
        ]
    },
    entry_points={
        'console_scripts': [
            'page-resolver=page_resolver.cli.main:main',
        ],
    },
)
