from setuptools import setup, find_packages

setup(
    name='research-architect',
    version='1.0',
    description='ARCH: an LLM-backed research design scaffold (question maps, hypotheses, blueprints, expertise gaps, keyword search plans).',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    install_requires=[
        'pyyaml',
        'pandas',                  # tabular views of blueprint / heatmap slices
        # Core runtime deps used by the codebase
        'aiohttp',                 # async HTTP for the generation backend
        'gradio',                  # Web workspace
        'tokencost',               # token cost accounting
        'tiktoken',                # tokenization backend for tokencost
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'research-architect=research_architect.main:cli',
            'research-architect-ui=research_architect.ui_launcher:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.9',
)
