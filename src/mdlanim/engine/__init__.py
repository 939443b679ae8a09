from mdlanim.engine.interpreter import Engine, FrameInterpreter, RenderReport
