import sys

from sparse_nd.scripts.demo_matrix import main

if __name__ == '__main__':
    sys.exit(main())
