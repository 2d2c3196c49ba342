from keyexclude.cli import mainMulti

if __name__ == '__main__':
    mainMulti()
