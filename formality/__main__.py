# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import sys

from .cli import main

sys.exit(main())
