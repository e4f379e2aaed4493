from setuptools import setup

def parse_requirements(path):
    reqs = []
    with open(path) as fh:
        for line in fh:
            line = line.strip()
            if line and not line.startswith('#'):
                reqs.append(line)
    return reqs

if __name__ == "__main__":
    setup(
        name="pydistmat",
        version="0.0.1",
        platforms="linux",
        packages=["pydistmat"],
        python_requires=">=3.8",
        install_requires=parse_requirements("requirements.txt"),
        extras_require={"test": ["pytest"]},
    )
