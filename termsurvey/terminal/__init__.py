"""Low-level terminal control: key codes, cursor movement and key input."""