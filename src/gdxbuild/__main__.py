from gdxbuild.cli import main

main()
