#!/usr/bin/env python3
from kaperys.cli import main

if __name__ == "__main__":
    main()
