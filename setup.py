from setuptools import setup, find_packages

setup(
    name='osc_sdk_python',
    version='0.1.0',
    description='OSC over UDP receive, dispatch and send for interactive installations',
    packages=find_packages(include=['osc_sdk_python', 'osc_sdk_python.*']),
    python_requires='>=3.8',
    install_requires=[
        'loop-rate-limiters>=1.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0',
            'hypothesis>=6.0.0',
            'python-osc>=1.8.0',
        ],
    },
)
