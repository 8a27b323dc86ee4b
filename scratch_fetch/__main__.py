# scratch_fetch/__main__.py
# Entry script for `python -m scratch_fetch` and for the frozen executable.
from scratch_fetch.main import main

if __name__ == "__main__":
    main()
