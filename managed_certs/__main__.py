"""Run the managed-certs command line tool."""

from managed_certs.tool.managed_certs import main

if __name__ == "__main__":
    main()
