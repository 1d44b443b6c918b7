from setuptools import setup


setup(
    name='rpngraph',
    use_scm_version={
        # Source trees without git metadata still install
        'fallback_version': '0.1.0',
    },
    description='RPN graphing calculator engine',
    install_requires=[
        'regex',
        'prompt_toolkit',
        'numpy',
    ],
    packages=['rpngraph'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.8',
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    entry_points={
        'console_scripts': [
            'rpngraph = rpngraph.cli:main',
        ],
    },
    license='ISC',
)
