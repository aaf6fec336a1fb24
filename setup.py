from setuptools import setup, find_packages

setup(
    name='varscope',
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    version='0.1',
    description='Nested variable scopes for concurrently executing test actors',
    keywords=['testing', 'automation', 'load-testing', 'variables', 'scope'],
    classifiers=['Development Status :: 3 - Alpha',
                 'Intended Audience :: Developers',
                 'Topic :: Software Development :: Quality Assurance',
                 'Topic :: Software Development :: Testing',
                 'Programming Language :: Python :: 3'],
    python_requires='>=3.11',
    install_requires=['rich', 'blinker', 'docopt'],
    extras_require={
        "test": ['pytest'],
    },
    entry_points={
        "console_scripts": ['varscope = varscope.varscope:run_varscope']
    }
)
