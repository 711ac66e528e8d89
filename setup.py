from setuptools import setup, find_packages

with open("Readme.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="watchman-remote-inventory",
    version="1.0.0",
    author="Watchman",
    author_email="support@watchman.bj",
    description='Collecte des services et tâches planifiées sur un parc de machines Windows distantes.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    include_package_data=True,
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.8',
    install_requires=[
        "pywinrm>=0.4.3",
        "requests>=2.28.0",
        "Flask>=2.3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "dev": [
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },

    entry_points='''
        [console_scripts]
        watchman-remote-inventory=remote_inventory.main:main
    '''
)
