from vaultdiff.cli import console_main

console_main()
