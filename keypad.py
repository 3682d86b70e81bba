"""
Keypad for PocketCalc
Maps button labels and keyboard keys onto calculator operations
"""

# Rows as they appear on the keypad, top to bottom
BUTTON_LAYOUT = [
    ["MC", "MR", "M+", "M-"],
    ["⌫", "CE", "C", "±"],
    ["√", "%", "1/x", "÷"],
    ["7", "8", "9", "×"],
    ["4", "5", "6", "-"],
    ["1", "2", "3", "+"],
    ["0", ".", "="],
]

OPERATOR_BUTTONS = "+-×÷*/%"

FUNCTION_BUTTONS = {
    "=": "calculate",
    "C": "clear",
    "CE": "clear_entry",
    "⌫": "backspace",
    "±": "toggle_sign",
    "√": "square_root",
    "1/x": "reciprocal",
    "MC": "memory_clear",
    "MR": "memory_recall",
    "M+": "memory_add",
    "M-": "memory_subtract",
}


def press(calculator, button):
    """Handle a keypad button press and return the new display"""
    if len(button) == 1 and button in '0123456789.':
        return calculator.input_number(button)
    if len(button) == 1 and button in OPERATOR_BUTTONS:
        return calculator.input_operation(button)
    if button in FUNCTION_BUTTONS:
        return getattr(calculator, FUNCTION_BUTTONS[button])()
    raise ValueError(f"Unknown button: {button!r}")


def key_to_button(char, keysym=None):
    """Translate keyboard input into a keypad button, or None"""
    if keysym == 'BackSpace':
        return "⌫"
    if keysym == 'Escape':
        return "C"
    if keysym == 'Delete':
        return "CE"
    if not char:
        return None
    if char in '0123456789.%+-':
        return char
    if char == '*':
        return "×"
    if char == '/':
        return "÷"
    if char in ['\r', '\n', '=']:
        return "="
    return None
