import sys

from word_count import main

sys.exit(main())
