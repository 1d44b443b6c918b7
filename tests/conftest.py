from pytest import Item, fixture

from rpngraph.engine import ExpressionEngine


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP and enable_assertion_pass_hook.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!
    print('actual', item.name + ':' + str(lineno),
          # Get rid of full-diff, -vv for full diff, etc.
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def engine():
    return ExpressionEngine()


@fixture
def load(engine):
    '''
    Load a program (list of tokens) into the engine and hand it back.
    '''
    def loader(*tokens):
        engine.program = [str(token) for token in tokens]
        return engine
    return loader
