from setuptools import setup


setup(
    name='kartel',
    packages = ['kartel', 'utils'],
    py_modules = ['run_bot'],
    version = '0.1.0',
    license='GPL-3.0',
    description = 'Telegram bot answering forex, rates and currency conversion commands from a pricing API.',
    keywords = ['telegram', 'bot', 'forex', 'currency'],
    python_requires = '>=3.11',
    install_requires = [
        'requests',
        'fastapi',
        'uvicorn',
    ],
    extras_require = {
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points = {
        'console_scripts': ['kartel=run_bot:main'],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Programming Language :: Python :: 3',
    ],
)
