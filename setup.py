from setuptools import setup, find_packages

setup(
    name='autons',
    version='0.1.0',
    packages=find_packages(),
    include_package_data=True,
    install_requires=[
        'typer',
        'kubernetes',
        'python-dotenv',
        'PyYAML',
        'urllib3',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'autons=autons.cli:app',
            'kubectl-autons=autons.cli:app',
        ]
    },
    description='Run kubectl commands by resource name without specifying the namespace',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
