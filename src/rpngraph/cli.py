from os import isatty
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging
import math
import sys

from prompt_toolkit import PromptSession

from .util import RPNError
from .engine import ExpressionEngine, Success
from .lexer import Lexer, tonumber
from .sampler import SampleGenerator


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the expression engine.
    '''

    DEFAULT_PROMPT = '> '
    DEFAULT_SAMPLES = 320
    DEFAULT_DOMAIN = (-2 * math.pi, 2 * math.pi)
    LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

    def dumper(self):
        '''
        Dump all lexemes matches, and arity of registered symbols.
        '''
        engine = ExpressionEngine()
        lexer = Lexer()
        print('[groups]\t<repr(repr)>\t<arity>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                matched = match.group(0)  # the lexeme text itself
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(matched),
                      engine.arity(matched),
                      sep='\t')

    def feed(self, engine, groups):
        '''
        Run one lexeme on engine, returning the evaluation result.
        '''
        if 'number' in groups:
            return engine.push_operand(tonumber(groups['number']))
        elif 'store' in groups:
            result = engine.evaluate()
            if not isinstance(result, Success):
                raise RPNError('Nothing to store into {}'
                               .format(groups['__name__']))
            return engine.store(groups['__name__'], result.value)
        elif 'command' in groups:
            if groups['command'] == 'undo':
                engine.undo()
            else:
                engine.clear()
                engine.variable_values.clear()
            return engine.evaluate()
        else:
            return engine.push_token(groups['word'])

    def show(self, engine, result):
        '''
        Print history trail and result, like the calculator's two displays.
        '''
        print(engine.history())
        if isinstance(result, Success):
            print(result.value)
        else:
            print(result.message)

    def executor(self):
        '''
        Run engine (RPN calculator).
        '''
        engine = ExpressionEngine()
        lexer = Lexer()
        for line in self.args.expressions:
            result = None
            try:
                for match in lexer.lex(line):
                    if lexer.isfeedable(match):
                        result = self.feed(engine, lexer.matchedgroups(match))
            # Abort entire rest of line, makes sense anyway
            except RPNError as e:
                print(e.args[0], file=sys.stderr)
            if result is not None:
                self.show(engine, result)
        if self.args.plot:
            self.plotter(engine)

    def plotter(self, engine):
        '''
        Print sampled points of the engine's program, then their bounds.
        '''
        min_x, max_x = self.args.domain
        logger.debug('Plotting %s over [%s, %s]', engine.label, min_x, max_x)
        generator = SampleGenerator(engine, min_x, max_x,
                                    samples=self.args.samples,
                                    variable=self.args.variable)
        for x, y in generator:
            print(x, y, sep='\t')
        statistics = generator.statistics()
        if statistics is None:
            print('No points', file=sys.stderr)
            return
        for name, value in statistics._asdict().items():
            print('{}: {}'.format(name.replace('_', '-'), value),
                  file=sys.stderr)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='RPN graphing '
                                                          'calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        plot_group = self.argument_parser.add_argument_group('plotting')
        plot_group.add_argument('--plot', action='store_true',
                                help='sample the program once input ends')
        plot_group.add_argument('--variable',
                                default=SampleGenerator.DEFAULT_VARIABLE)
        plot_group.add_argument('--domain', nargs=2, type=float,
                                metavar=('MIN', 'MAX'),
                                default=self.DEFAULT_DOMAIN,
                                help='in radians')
        plot_group.add_argument('--samples', type=int,
                                default=self.DEFAULT_SAMPLES)
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _configure_logging(self):
        logging.basicConfig(format=self.LOG_FORMAT,
                            level=logging.DEBUG if self.args.verbose
                            else logging.INFO)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        self._configure_logging()
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)


def main():
    CLI().run()
