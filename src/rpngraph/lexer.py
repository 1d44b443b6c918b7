from functools import reduce
import operator

import regex

from .util import RPNError, wrap_user_errors


# Default regex flags for matching lexemes
FLAGS = reduce(operator.__or__,
               {regex.DOTALL,
                regex.VERSION1,
                regex.VERBOSE},
               0)

# Integral part of a number
INTEGRAL = r'''
            # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
            (?:
                # 1, 12, or the 1 in 1_200.
                \d{1,3}
                (?:
                    # The 4, 45, etc. in 1234, 12345, etc.
                    \d
                    |
                    # Support not just digits, but thousands separators
                    (?:
                        _\d{3}
                    )
                )*
            )
            '''
# Fractional part of a number
FRACTIONAL = r'''
              # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
              (?:
                  \d+
                  |
                  (?:
                      \d{3}
                      (?:
                          _\d{3}
                      )*
                      (?:
                          _\d{1,2}
                      )?
                  )+
              )
              '''
# 1e-05, 2.5E+300; what repr() gives back for very small and large floats.
EXPONENT = r'''
            (?:
                [eE]
                [+-]?
                \d+
            )
            '''
# Number, of any kind supported by grammar.
# String formatting and regex is a tricky business, because of the braces.
# It works here. Be careful in general!
NUMBER = r'''
          [+-]?
          (?:
              (?:
                  (?:
                      # 1, 12, 1_200, 1_200. (notice trailing dot), 1.3
                      {INTEGRAL}
                      (?:
                          \.
                          {FRACTIONAL}?
                      )?
                  )|(?:
                      # .2, 0.2, 0.200_200 but not 0.2_200
                      {INTEGRAL}?
                      \.
                      {FRACTIONAL}
                  )
              )
              {EXPONENT}?
              |
              # Spelled the way str(float) spells them, so programs survive
              # a round trip.
              inf
              |
              nan
          )
          '''.format(INTEGRAL=INTEGRAL, FRACTIONAL=FRACTIONAL,
                     EXPONENT=EXPONENT)


def isnumber(text):
    '''
    Return True if the whole of text is a numeric literal.
    '''
    return regex.fullmatch(NUMBER, text, flags=FLAGS) is not None


@wrap_user_errors('Cannot convert {0}')
def tonumber(text):
    '''
    Convert numeric literal to the float the engine works with.
    '''
    # Handle the underscores in here. Ugly. FIXME?
    return float(text.replace('_', ''))


class Lexer:
    '''
    Lexer for the calculator's *regular* token grammar.

    Tokens are whitespace separated. Which words are operators, constants or
    variables is for the engine to decide, not the lexer.

    For consistency, for now, needs to be instantiated, despite holding no
    internal state.
    '''
    # Store current result into a variable, like the calculator's →M key.
    STORE = r'''
             →
             (?<__name__>
                 \S+
             )
             '''
    COMMAND = r'(?:undo|clear)'
    WORD = r'\S+'
    SPACE = r'\s+'
    # Lexemes must end at whitespace or at the end of the line
    END = r'(?=\s|$)'

    # Immediate, as in immediately complete lexeme
    IMMEDIATE = r'(?<store>' + STORE + r')|' \
                r'(?<command>' + COMMAND + r')' + END + r'|' \
                r'(?<word>' + WORD + r')|' \
                r'(?<space>' + SPACE + r')'
    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')' + END + r'|' \
             r'(?<immediate>' + IMMEDIATE + r')'

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Doesn't yield incomplete or incorrect lexemes, stopping on first bad.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line, flags=FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise RPNError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme can be fed to the engine.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return matched lexeme groups, by group name.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value and key != 'immediate'}
